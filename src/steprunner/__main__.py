from steprunner.cli import main

main()
