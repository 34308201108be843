"""Cosign adapter for the Signer port."""

from secure_import.infrastructure.tools.process import ToolRunner


class CosignSigner:
    def __init__(self, runner: ToolRunner, cosign: str = "cosign", tlog_upload: bool = False) -> None:
        self._runner = runner
        self._cosign = cosign
        self._tlog_upload = tlog_upload

    def available(self) -> bool:
        return self._runner.available(self._cosign)

    async def sign(self, key: str, reference: str) -> None:
        await self._runner.run(
            self._cosign,
            "sign",
            f"--tlog-upload={str(self._tlog_upload).lower()}",
            "--yes",
            "--key",
            key,
            reference,
        )
