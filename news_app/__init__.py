"""News app: posts with CRUD, keyword search and pagination."""
