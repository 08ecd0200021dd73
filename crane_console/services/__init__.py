# Service layer for the crane console
# - device_client: long-lived aiohttp client for the device HTTP API
# - commands:      validate -> build -> dispatch -> view state -> notify
