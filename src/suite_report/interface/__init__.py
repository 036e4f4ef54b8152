from .cli import CLIApplication, RenderCommand

__all__ = ["CLIApplication", "RenderCommand"]
