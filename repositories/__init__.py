"""
repositories/ - Data Access Layer
==================================
One repository per table: users, posts, comments.
Each method runs as a single transaction and returns domain model objects;
failures surface as db.errors.ConstraintViolation or db.errors.NotFound.
"""
