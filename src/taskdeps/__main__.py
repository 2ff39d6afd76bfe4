from taskdeps.cli import main

main()
