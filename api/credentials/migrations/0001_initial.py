import django.db.models
from django.db import migrations

import credentials.models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="IssuedChallenge",
            fields=[
                (
                    "id",
                    django.db.models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                (
                    "challenge",
                    django.db.models.CharField(
                        db_index=True, max_length=512, unique=True
                    ),
                ),
                ("provider", django.db.models.CharField(max_length=256)),
                (
                    "address",
                    credentials.models.EthAddressField(db_index=True, max_length=42),
                ),
                ("created_on", django.db.models.DateTimeField(auto_now_add=True)),
                ("expires_on", django.db.models.DateTimeField()),
                ("was_used", django.db.models.BooleanField(default=False)),
            ],
        ),
    ]
