"""
StudyHub Backend - External Adapter Tests
===========================================

What:  Razorpay, Cloudinary and SMTP adapters, with the network replaced by
       httpx.MockTransport (HTTP) or a patched aiosmtplib.send (SMTP).

What we test:
    ✅ Order creation payload, basic auth and error translation
    ✅ Unconfigured adapters fail with ExternalServiceError
    ✅ Cloudinary request signing and upload form fields
    ✅ Mail delivery and failure wrapping
"""

import base64
import hashlib
import json
from unittest.mock import AsyncMock, patch

import aiosmtplib
import httpx
import pytest

from studyhub.exceptions import ExternalServiceError
from studyhub.services.image_uploader import CloudinaryUploader, sign_params
from studyhub.services.mail_service import MailService
from studyhub.services.razorpay_gateway import RazorpayGateway


class TestRazorpayGateway:

    @pytest.mark.asyncio
    async def test_create_order(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["auth"] = request.headers["Authorization"]
            seen["body"] = json.loads(request.content)
            return httpx.Response(
                200,
                json={"id": "order_abc", "amount": 50000, "currency": "INR", "status": "created"},
            )

        gateway = RazorpayGateway(
            key_id="rzp_key",
            key_secret="rzp_secret",
            api_url="https://api.razorpay.test/v1",
            transport=httpx.MockTransport(handler),
        )

        order = await gateway.create_order(50000, "INR", "receipt_1", {"userId": "u1"})

        assert order["id"] == "order_abc"
        assert seen["url"] == "https://api.razorpay.test/v1/orders"
        expected_auth = base64.b64encode(b"rzp_key:rzp_secret").decode()
        assert seen["auth"] == f"Basic {expected_auth}"
        assert seen["body"] == {
            "amount": 50000,
            "currency": "INR",
            "receipt": "receipt_1",
            "notes": {"userId": "u1"},
        }

    @pytest.mark.asyncio
    async def test_rejected_order_uses_gateway_description(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                400,
                json={"error": {"code": "BAD_REQUEST_ERROR", "description": "Order amount less than minimum amount allowed"}},
            )

        gateway = RazorpayGateway("k", "s", transport=httpx.MockTransport(handler))

        with pytest.raises(ExternalServiceError) as exc_info:
            await gateway.create_order(50, "INR", "receipt_1")

        assert exc_info.value.message == "Order amount less than minimum amount allowed"
        assert exc_info.value.status_code == 500

    @pytest.mark.asyncio
    async def test_unreachable_gateway(self):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            raise httpx.ConnectError("connection refused", request=request)

        gateway = RazorpayGateway("k", "s", transport=httpx.MockTransport(handler))

        with pytest.raises(ExternalServiceError) as exc_info:
            await gateway.create_order(50000, "INR", "receipt_1")

        assert exc_info.value.message == "Could not initiate order"
        # Orders are never retried
        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_unconfigured(self):
        gateway = RazorpayGateway(key_id="", key_secret="")

        with pytest.raises(ExternalServiceError) as exc_info:
            await gateway.create_order(100, "INR", "r")

        assert exc_info.value.message == "Payment gateway is not configured"

    def test_signature_with_non_ascii_input_is_rejected(self):
        gateway = RazorpayGateway("k", "secret")

        assert gateway.verify_signature("order_1", "pay_1", "ünïcode") is False


class TestCloudinaryUploader:

    def test_sign_params_sorts_and_skips_empty(self):
        params = {"timestamp": 1700000000, "folder": "avatars", "public_id": ""}

        expected = hashlib.sha1(b"folder=avatars&timestamp=1700000000secret").hexdigest()

        assert sign_params(params, "secret") == expected

    @pytest.mark.asyncio
    async def test_upload_sends_signed_form(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["body"] = request.content
            return httpx.Response(
                200,
                json={"public_id": "avatars/abc", "secure_url": "https://res.cloudinary.com/demo/abc.png"},
            )

        uploader = CloudinaryUploader(
            cloud_name="demo",
            api_key="123",
            api_secret="shh",
            api_url="https://api.cloudinary.test/v1_1",
            transport=httpx.MockTransport(handler),
        )

        result = await uploader.upload_image(b"PNGDATA", "me.png", "avatars", height=1000, width=1000)

        assert result["secure_url"] == "https://res.cloudinary.com/demo/abc.png"
        assert seen["url"] == "https://api.cloudinary.test/v1_1/demo/image/upload"
        body = seen["body"]
        assert b'name="folder"' in body and b"avatars" in body
        assert b'name="transformation"' in body and b"c_limit,h_1000,w_1000" in body
        assert b'name="signature"' in body
        assert b'name="api_key"' in body
        assert b"PNGDATA" in body

    @pytest.mark.asyncio
    async def test_rejected_upload(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(401, json={"error": {"message": "Invalid Signature"}})

        uploader = CloudinaryUploader("demo", "123", "shh", transport=httpx.MockTransport(handler))

        with pytest.raises(ExternalServiceError) as exc_info:
            await uploader.upload_image(b"x", "x.png", "avatars")

        assert exc_info.value.message == "Image upload was rejected"

    @pytest.mark.asyncio
    async def test_server_error_after_retries(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(503)

        uploader = CloudinaryUploader("demo", "123", "shh", transport=httpx.MockTransport(handler))

        with pytest.raises(ExternalServiceError):
            await uploader.upload_image(b"x", "x.png", "avatars")

    @pytest.mark.asyncio
    async def test_unconfigured(self):
        uploader = CloudinaryUploader("", "", "")

        with pytest.raises(ExternalServiceError) as exc_info:
            await uploader.upload_image(b"x", "x.png", "avatars")

        assert exc_info.value.message == "Image host is not configured"


class TestMailService:

    @pytest.mark.asyncio
    async def test_send_builds_html_message(self):
        with patch('studyhub.services.mail_service.aiosmtplib.send', new_callable=AsyncMock) as mock_send:
            await MailService().send("learner@example.com", "Payment Received", "<p>Thanks</p>")

        message = mock_send.await_args.args[0]
        assert message["To"] == "learner@example.com"
        assert message["Subject"] == "Payment Received"
        html_part = message.get_body(preferencelist=("html",))
        assert "<p>Thanks</p>" in html_part.get_content()

    @pytest.mark.asyncio
    async def test_smtp_failure_is_wrapped(self):
        with patch(
            'studyhub.services.mail_service.aiosmtplib.send',
            new_callable=AsyncMock,
            side_effect=aiosmtplib.SMTPConnectError("relay down"),
        ):
            with pytest.raises(ExternalServiceError) as exc_info:
                await MailService().send("learner@example.com", "Hi", "<p>x</p>")

        assert exc_info.value.message == "Could not send email"
