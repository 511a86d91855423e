"""OAuth transport and Dexcom API client."""
