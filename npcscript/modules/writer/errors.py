from __future__ import annotations


class NpcWriterError(RuntimeError):
    def __init__(
        self,
        *,
        code: str,
        message: str,
        node_index: int | None = None,
        stage: str | None = None,
    ) -> None:
        super().__init__(message)
        self.code = str(code)
        self.message = str(message)
        self.node_index = node_index
        self.stage = str(stage) if stage is not None else None


class NodeEmitError(NpcWriterError):
    def __init__(self, *, node_index: int, stage: str, detail: str) -> None:
        super().__init__(
            code="NODE_EMIT_FAILED",
            message=f"node #{node_index} failed while writing stage '{stage}': {detail}",
            node_index=node_index,
            stage=stage,
        )
