from personstore.cli import main

main()
