"""Console scripts for OINO."""
