# Squadboard HTTP API layer
# Created: 2026-02-20
#
# Versioned REST endpoints for the dashboard UI and agent scripts, mounted at /api/v1/.
