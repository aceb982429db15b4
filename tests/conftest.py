from hypothesis import HealthCheck, settings

# First-run generation of text strategies builds Hypothesis's unicode cache,
# which can trip the too_slow health check on a clean checkout.
settings.register_profile("default", suppress_health_check=[HealthCheck.too_slow])
settings.load_profile("default")
