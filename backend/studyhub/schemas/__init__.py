# Schemas package init
# Pydantic models for request bodies and response envelopes. Kept separate
# from the ORM models so wire names (camelCase) can differ from columns.
