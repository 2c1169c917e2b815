from xrpcgen.generators.go_server.generator import GoServerGenerator

__all__ = ["GoServerGenerator"]
