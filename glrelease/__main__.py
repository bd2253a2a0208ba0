from glrelease.cli.app import main

main()
