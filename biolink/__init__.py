"""Link-in-bio page builder."""
