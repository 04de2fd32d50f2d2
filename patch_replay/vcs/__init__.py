from .gateway import CommandResult, VCSGateway, GitGateway

__all__ = ["CommandResult", "VCSGateway", "GitGateway"]
