"""Starter .autoapprove.toml template."""

DEFAULT_TOML = """\
# autoapprove configuration
version = "1.0"

[github]
api_url = "https://api.github.com"
token_env = "GITHUB_TOKEN"    # environment variable holding the API token
timeout_seconds = 30

[rules]
# enable = ["OWLBOT_API_CHANGES", "UPDATE_DISCOVERY_ARTIFACTS"]   # empty = all enabled
# disable = ["NODE_DEPENDENCY"]
custom_dir = ".autoapprove-rules"

[checks]
abort_on_lookup_error = false  # true: one failed lookup aborts the whole PR

[output]
format = "terminal"            # terminal | json

[logging]
level = "WARNING"              # DEBUG | INFO | WARNING | ERROR
"""
