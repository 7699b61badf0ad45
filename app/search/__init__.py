"""
Catalog keyword search.

`cascade.py` holds the tiered search itself and knows nothing about Flask or
the database. `sources.py` answers its questions from the catalog tables,
`services.py` wires both to the form input, synonyms and search history, and
`routes.py` exposes the form, submit/redirect and results endpoints.
"""
