SERVICE_NAME = "airtable-record-deleter"
SERVICE_VERSION = "1.0.0"

# Airtable rejects batch deletes with more than 10 records.
AIRTABLE_BATCH_LIMIT = 10
