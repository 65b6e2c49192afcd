"""Client-side credential handling: token inspection and the credential store."""
