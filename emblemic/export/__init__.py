"""Export pipelines: raster, vector and the format-dispatching service."""
