import logging
from typing import Optional

from optfactory import EnvSource, GenericFactory, OptionValidationError


class OtlpExporter:
    def __init__(self, endpointUrl: str, timeout: float = 10.0, headers: Optional[dict] = None, *, insecure: bool = False):
        self.endpoint_url = endpointUrl
        self.timeout = timeout
        self.headers = headers or {}
        self.insecure = insecure

    def __repr__(self):
        return f"OtlpExporter({self.endpoint_url!r}, timeout={self.timeout}, insecure={self.insecure})"


def main():
    logging.basicConfig(level=logging.DEBUG)

    factory = GenericFactory(OtlpExporter).set_default("timeout", 5.0)
    print("options:", factory.options, "keyword:", factory.keyword_options)
    print("required:", factory.required_options, "defaults:", factory.defaults)

    print(factory.build({"endpoint_url": "http://localhost:4318", "insecure": True}))
    print(factory.build_from(EnvSource(prefix="OTLP_", environ={"OTLP_ENDPOINT_URL": "http://collector:4318", "OTLP_TIMEOUT": "2.5"})))

    try:
        factory.build({"timeout": "soon", "compression": "gzip"})
    except OptionValidationError as e:
        print(f"{type(e).__name__}: {e}")


if __name__ == "__main__":
    main()
