from gridbot.cli import main

main()
