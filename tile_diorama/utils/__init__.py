"""Pure helpers: isometric grid math and sprite anchor detection."""
