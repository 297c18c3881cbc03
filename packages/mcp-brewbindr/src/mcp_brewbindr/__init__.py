"""
mcp-brewbindr: MCP server for BeerXML import/export and brewing calculations.
"""

__version__ = "0.1.0"
