from jtix.cli import main

main()
