"""HTTP layer: upload/download pages and the JSON API."""
