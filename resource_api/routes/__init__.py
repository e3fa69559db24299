"""HTTP routers, one module per area; aggregated in resource_api.api."""
