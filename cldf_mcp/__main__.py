from cldf_mcp.server import main

main()
