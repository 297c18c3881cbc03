"""
FastMCP server definition for brewbindr.
"""

from fastmcp import FastMCP

from mcp_brewbindr.tools import register_tools

# Create the MCP server
mcp = FastMCP(
    "mcp-brewbindr",
    instructions="BeerXML recipe import/export, ingredient library and brewing calculations",
)

# Register all tools
register_tools(mcp)
