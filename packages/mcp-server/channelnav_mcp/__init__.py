"""
ChannelNav MCP Server - Model Context Protocol server for channel attribution.

Exposes ChannelNav to MCP clients:
- UTM tools (ingest, batch ingest, lookup)
- Configuration tools (normalization rules, source mappings, channel costs)
- Attribution and metrics tools (CAC, ROI, ROAS)
- HubSpot tools (CRM card, detail view, contact sync, property setup)

Usage:
    # Via CLI
    channelnav-mcp

    # Via Python
    from channelnav_mcp import server
    server.main()

    # Via an MCP client config (.mcp.json)
    {
        "mcpServers": {
            "channelnav": {
                "command": "channelnav-mcp",
                "env": {"HUBSPOT_ACCESS_TOKEN": "..."}
            }
        }
    }
"""

__version__ = "0.1.0"
