"""
https://python-dependency-injector.ets-labs.org/index.html
https://python-dependency-injector.ets-labs.org/examples/fastapi-sqlalchemy.html
"""

from dependency_injector import containers, providers

from src.platform.config.core_setting import settings
from src.platform.database.orm_db_setting import Database
from src.platform.database.unit_of_work import UnitOfWorkFactory
from src.service.commerce.driven_adapter.notification.log_notification_dispatcher_impl import (
    LogNotificationDispatcherImpl,
)
from src.service.commerce.driven_adapter.payment.stripe_payment_gateway_impl import (
    StripePaymentGatewayImpl,
)
from src.service.commerce.driven_adapter.token.jwt_order_token_service_impl import (
    JwtOrderTokenServiceImpl,
)


class Container(containers.DeclarativeContainer):
    # Database (sessions from AsyncEngineManager)
    database = providers.Singleton(Database, read_only=False)

    # Fresh UoW per call, for work that runs after the response (follow-up tasks)
    unit_of_work_factory = providers.Singleton(UnitOfWorkFactory, database=database)

    # Payment processor (stateless client, shared by every request)
    payment_gateway = providers.Singleton(
        StripePaymentGatewayImpl,
        api_key=settings.STRIPE_API_KEY.get_secret_value(),
        currency=settings.STRIPE_CURRENCY,
        processor_name=settings.PAYMENT_PROCESSOR_NAME,
    )

    # Outbound e-mail / mailing list
    notification_dispatcher = providers.Singleton(LogNotificationDispatcherImpl)

    # Customer ticket links
    order_token_service = providers.Singleton(
        JwtOrderTokenServiceImpl,
        secret=settings.ORDER_TOKEN_SECRET.get_secret_value(),
        issuer=settings.ORDER_TOKEN_ISSUER,
        audience=settings.ORDER_TOKEN_AUDIENCE,
    )


container = Container()
