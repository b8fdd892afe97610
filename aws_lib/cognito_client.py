from .base_client import AWSBaseClient

class CognitoClient(AWSBaseClient):
    """Thin wrapper over a Cognito user pool app client."""

    def __init__(self, client_id, region_name="us-east-1", config=None, session_factory=None):
        super().__init__("cognito-idp", region_name=region_name, config=config,
                         session_factory=session_factory)
        self.client_id = client_id

    def initiate_auth(self, username, password):
        resp = self.client.initiate_auth(
            ClientId=self.client_id,
            AuthFlow="USER_PASSWORD_AUTH",
            AuthParameters={"USERNAME": username, "PASSWORD": password},
        )
        return resp.get("AuthenticationResult", {})

    def get_user_attributes(self, access_token):
        """Return (username, {attribute: value}) for the token's user."""
        resp = self.client.get_user(AccessToken=access_token)
        attrs = {a["Name"]: a["Value"] for a in resp.get("UserAttributes", [])}
        return resp.get("Username"), attrs

    def global_sign_out(self, access_token):
        return self.client.global_sign_out(AccessToken=access_token)
