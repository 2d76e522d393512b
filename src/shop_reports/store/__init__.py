"""Record stores.

One store per record type (sales, expenses, inventory) behind a common
add/list/get/update interface, backed by a Python list or a MongoDB
collection.
"""
