from npm_mcp import main

main()
