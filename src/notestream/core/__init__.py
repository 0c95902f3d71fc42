"""Domain core: models, repositories, schemas, services and realtime fan-out."""
