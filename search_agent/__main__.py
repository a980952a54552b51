from search_agent.cli import main

main()
