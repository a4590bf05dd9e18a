"""Link fault simulation and rule-based root-cause diagnosis."""
