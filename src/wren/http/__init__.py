"""HTTP primitives: request, response, headers, query, forms, uploads."""
