from functools import lru_cache

from clientpl.adapters.firestore.store import FirestoreDocumentStore
from clientpl.adapters.google.credentials import ServiceAccountConfig
from clientpl.adapters.sheets.google_sheets import GoogleSheetsLedgerSource
from clientpl.core.summaries.config import SummaryConfig
from clientpl.core.summaries.service import ClientSummaryService


@lru_cache(maxsize=1)
def get_summary_service() -> ClientSummaryService:
    config = SummaryConfig.from_env()
    credentials = ServiceAccountConfig.from_env()
    # Adapter retries stop before the service's fetch timeout abandons the call.
    store = FirestoreDocumentStore(config=credentials, retry_deadline=config.fetch_timeout)
    ledger_source = GoogleSheetsLedgerSource(config=credentials, retry_deadline=config.fetch_timeout)
    return ClientSummaryService(store, ledger_source, config)
