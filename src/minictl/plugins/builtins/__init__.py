"""Built-in plugins registered on every PluginManager."""
