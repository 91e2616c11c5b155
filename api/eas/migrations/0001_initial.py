from django.db import migrations, models

import credentials.models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="NonceReservation",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                (
                    "address",
                    credentials.models.EthAddressField(
                        db_index=True, max_length=42, unique=True
                    ),
                ),
                ("nonce", models.DecimalField(decimal_places=0, max_digits=78)),
                ("reserved_until", models.DateTimeField()),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
        ),
    ]
