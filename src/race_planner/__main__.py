from race_planner.cli import main

main()
