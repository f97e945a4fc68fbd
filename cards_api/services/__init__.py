# Services package.
#
#   card_service  — Card CRUD plus the single-file attachment lifecycle
#
# Services receive their stores through the constructor so the router
# layer (via ``cards_api.dependencies``) decides which session and which
# blob backend a request uses, and tests can pass in fakes.
