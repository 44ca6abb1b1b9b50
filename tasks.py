from bookstore_api import namespace
