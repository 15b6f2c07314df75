"""HTTP trigger surface for the catalog refresh."""
