"""Card deck test-draw engine and service."""
