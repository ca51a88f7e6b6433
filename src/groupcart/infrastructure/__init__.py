"""Infrastructure layer — database engine, schema, migrations, and the Store."""
