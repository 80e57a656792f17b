from gitdeck.cli.app import main

main()
