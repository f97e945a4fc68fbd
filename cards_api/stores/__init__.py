# Stores package.
#
# Thin adapters over the two external systems the card service talks to:
#
#   card_store  — Card rows in the relational database (AsyncSession)
#   blob_store  — card file payloads in an S3-compatible bucket (boto3)
#
# Neither store contains business rules; ordering of calls, best-effort
# cleanup and the one-file-per-card invariant live in the service layer.
