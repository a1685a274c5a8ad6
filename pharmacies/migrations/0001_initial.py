import django.db.models.deletion
import django.utils.timezone
import uuid
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Pharmacy',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('deleted_at', models.DateTimeField(blank=True, null=True)),
                ('is_deleted', models.BooleanField(default=False)),
                ('uuid', models.UUIDField(default=uuid.uuid4, editable=False)),
                ('name', models.CharField(max_length=255)),
                ('registration_number', models.CharField(max_length=100, unique=True)),
                ('location', models.CharField(blank=True, max_length=255)),
                ('address', models.TextField(blank=True)),
                ('ward_area', models.CharField(blank=True, help_text='Ward or area within the region', max_length=120)),
                ('registration_status', models.CharField(choices=[('active', 'Active'), ('pending', 'Pending'), ('expired', 'Expired'), ('suspended', 'Suspended')], default='pending', max_length=20)),
                ('registration_date', models.DateField(default=django.utils.timezone.localdate)),
                ('superintendent_name', models.CharField(blank=True, max_length=255)),
                ('director_name', models.CharField(blank=True, max_length=255)),
                ('pcn_license', models.CharField(blank=True, help_text='Pharmacists Council licence number', max_length=100)),
                ('owner', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='pharmacies', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name_plural': 'pharmacies',
                'ordering': ['name'],
                'indexes': [
                    models.Index(fields=['registration_status'], name='pharmacy_status_idx'),
                    models.Index(fields=['ward_area'], name='pharmacy_ward_idx'),
                ],
            },
        ),
    ]
