"""Domain layer for duoledger.

Services live in their own modules (``duoledger.domain.transaction``,
``duoledger.domain.csv_import``, ``duoledger.domain.reports``,
``duoledger.domain.audit``); the pure engine is in ``aggregation``,
``dashboard``, ``filters`` and ``mirroring``.
"""
