from timesheet_mcp.server import run

run()
