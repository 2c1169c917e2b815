from xrpcgen.generators.ts_client.generator import TsClientGenerator

__all__ = ["TsClientGenerator"]
