"""Orchestration chains."""

from stagedfs.chains.transform_chain import RunOptions, RunReport, TransformChain

__all__ = ["RunOptions", "RunReport", "TransformChain"]
