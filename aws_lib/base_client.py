import boto3

class AWSBaseClient:
    """
    Base AWS client that builds its boto3 client/resource from a session
    factory on every access, so expired temporary credentials are picked
    up again without restarting the dashboard.

    Tests pass a ``session_factory`` returning an in-memory fake.
    """

    def __init__(self, service_name, region_name="us-east-1", config=None, session_factory=None):
        self.service_name = service_name
        self.region_name = region_name
        self.config = config
        self.session_factory = session_factory or boto3.Session

    def _kwargs(self):
        kwargs = {"region_name": self.region_name}
        if self.config is not None:
            kwargs["config"] = self.config
        return kwargs

    @property
    def client(self):
        session = self.session_factory()
        return session.client(self.service_name, **self._kwargs())

    @property
    def resource(self):
        session = self.session_factory()
        return session.resource(self.service_name, **self._kwargs())
