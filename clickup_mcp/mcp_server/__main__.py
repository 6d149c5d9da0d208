from clickup_mcp.mcp_server import main

main()
