from xrpcgen.generators.python_server.generator import PythonServerGenerator

__all__ = ["PythonServerGenerator"]
