"""Runtime modules copied verbatim into every generated package."""

ASSET_MODULES = ("api_models", "http_util", "oauth", "logging_interceptor")
