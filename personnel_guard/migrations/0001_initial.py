import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models

import personnel_guard.db.models

VISIBILITY_CHOICES = [
    ('public', 'Public'),
    ('internal', 'Internal'),
    ('restricted', 'Restricted'),
    ('private', 'Private'),
]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Office',
            fields=[
                ('id', models.CharField(default=personnel_guard.db.models.new_object_id, max_length=64, primary_key=True, serialize=False)),
                ('office_name', models.CharField(max_length=200)),
                ('office_name_bangla', models.CharField(blank=True, max_length=200)),
                ('office_code', models.CharField(blank=True, max_length=50, null=True, unique=True)),
                ('office_type', models.CharField(blank=True, choices=[('head_office', 'Head office'), ('regional_office', 'Regional office'), ('branch_office', 'Branch office'), ('site_office', 'Site office'), ('project_office', 'Project office')], max_length=32)),
                ('district', models.CharField(blank=True, max_length=100)),
                ('division', models.CharField(blank=True, max_length=100)),
                ('is_active', models.BooleanField(default=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('parent_office', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='child_offices', to='personnel_guard.office')),
            ],
            options={
                'ordering': ['office_name'],
            },
        ),
        migrations.CreateModel(
            name='Designation',
            fields=[
                ('id', models.CharField(default=personnel_guard.db.models.new_object_id, max_length=64, primary_key=True, serialize=False)),
                ('title', models.CharField(max_length=200, unique=True)),
                ('title_bangla', models.CharField(blank=True, max_length=200)),
                ('grade_level', models.PositiveSmallIntegerField(blank=True, null=True)),
                ('category', models.CharField(blank=True, choices=[('officer', 'Officer'), ('staff', 'Staff'), ('management', 'Management'), ('executive', 'Executive'), ('support', 'Support')], max_length=32)),
                ('is_active', models.BooleanField(default=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'ordering': ['grade_level', 'title'],
            },
        ),
        migrations.CreateModel(
            name='Officer',
            fields=[
                ('id', models.CharField(default=personnel_guard.db.models.new_object_id, max_length=64, primary_key=True, serialize=False)),
                ('full_name', models.CharField(max_length=200)),
                ('name_bangla', models.CharField(blank=True, max_length=200)),
                ('employee_id', models.CharField(blank=True, max_length=50, null=True, unique=True)),
                ('photo_url', models.CharField(blank=True, max_length=500)),
                ('father_name', models.CharField(blank=True, max_length=200)),
                ('mother_name', models.CharField(blank=True, max_length=200)),
                ('date_of_birth', models.DateField(blank=True, null=True)),
                ('blood_group', models.CharField(blank=True, max_length=8)),
                ('religion', models.CharField(blank=True, max_length=50)),
                ('marital_status', models.CharField(blank=True, max_length=20)),
                ('spouse_name', models.CharField(blank=True, max_length=200)),
                ('children_count', models.PositiveSmallIntegerField(blank=True, null=True)),
                ('emergency_contact_name', models.CharField(blank=True, max_length=200)),
                ('emergency_contact_phone', models.CharField(blank=True, max_length=30)),
                ('emergency_contact_relation', models.CharField(blank=True, max_length=50)),
                ('present_address', models.TextField(blank=True)),
                ('permanent_address', models.TextField(blank=True)),
                ('district', models.CharField(blank=True, max_length=100)),
                ('division', models.CharField(blank=True, max_length=100)),
                ('post_code', models.CharField(blank=True, max_length=20)),
                ('nid_number', models.CharField(blank=True, max_length=32, null=True, unique=True)),
                ('passport_number', models.CharField(blank=True, max_length=32)),
                ('tin_number', models.CharField(blank=True, max_length=32)),
                ('personal_mobile', models.CharField(blank=True, max_length=30)),
                ('official_mobile', models.CharField(blank=True, max_length=30)),
                ('personal_email', models.EmailField(blank=True, max_length=254)),
                ('official_email', models.EmailField(blank=True, max_length=254)),
                ('department', models.CharField(blank=True, max_length=200)),
                ('joining_date', models.DateField(blank=True, null=True)),
                ('employment_status', models.CharField(choices=[('active', 'Active'), ('on_leave', 'On leave'), ('suspended', 'Suspended'), ('retired', 'Retired'), ('terminated', 'Terminated'), ('resigned', 'Resigned')], default='active', max_length=20)),
                ('current_grade', models.PositiveSmallIntegerField(blank=True, null=True)),
                ('current_scale', models.CharField(blank=True, max_length=50)),
                ('basic_salary', models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True)),
                ('current_salary', models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True)),
                ('performance_rating', models.DecimalField(blank=True, decimal_places=2, max_digits=3, null=True)),
                ('last_appraisal_date', models.DateField(blank=True, null=True)),
                ('bank_name', models.CharField(blank=True, max_length=200)),
                ('bank_account_name', models.CharField(blank=True, max_length=200)),
                ('bank_account_number', models.CharField(blank=True, max_length=50)),
                ('bank_branch', models.CharField(blank=True, max_length=200)),
                ('phone_visibility', models.CharField(choices=VISIBILITY_CHOICES, default='internal', max_length=16)),
                ('email_visibility', models.CharField(choices=VISIBILITY_CHOICES, default='internal', max_length=16)),
                ('nid_visibility', models.CharField(choices=VISIBILITY_CHOICES, default='restricted', max_length=16)),
                ('profile_published', models.BooleanField(default=False)),
                ('verification_status', models.CharField(choices=[('pending', 'Pending'), ('verified', 'Verified'), ('rejected', 'Rejected'), ('needs_update', 'Needs update')], default='pending', max_length=20)),
                ('consent_record', models.JSONField(blank=True, null=True)),
                ('notes', models.TextField(blank=True)),
                ('internal_notes', models.TextField(blank=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL)),
                ('designation', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='officers', to='personnel_guard.designation')),
                ('office', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='officers', to='personnel_guard.office')),
                ('updated_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ['full_name'],
                'indexes': [models.Index(fields=['profile_published', 'verification_status'], name='personnel_g_profile_9b1f3e_idx')],
            },
        ),
        migrations.CreateModel(
            name='TransferEvent',
            fields=[
                ('id', models.CharField(default=personnel_guard.db.models.new_object_id, max_length=64, primary_key=True, serialize=False)),
                ('transfer_date', models.DateField(db_index=True)),
                ('transfer_type', models.CharField(choices=[('routine', 'Routine'), ('promotion', 'Promotion'), ('request', 'Request'), ('administrative', 'Administrative'), ('disciplinary', 'Disciplinary')], default='routine', max_length=20)),
                ('order_number', models.CharField(blank=True, max_length=100)),
                ('order_date', models.DateField(blank=True, null=True)),
                ('reason', models.TextField(blank=True)),
                ('remarks', models.TextField(blank=True)),
                ('created_by_id', models.IntegerField(blank=True, null=True)),
                ('correlation_id', models.CharField(blank=True, max_length=64)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('from_designation', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='+', to='personnel_guard.designation')),
                ('from_office', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='+', to='personnel_guard.office')),
                ('officer', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='transfers', to='personnel_guard.officer')),
                ('to_designation', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='+', to='personnel_guard.designation')),
                ('to_office', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='+', to='personnel_guard.office')),
            ],
            options={
                'ordering': ['-transfer_date', '-created_at'],
            },
        ),
        migrations.CreateModel(
            name='PromotionEvent',
            fields=[
                ('id', models.CharField(default=personnel_guard.db.models.new_object_id, max_length=64, primary_key=True, serialize=False)),
                ('from_grade', models.PositiveSmallIntegerField(blank=True, null=True)),
                ('to_grade', models.PositiveSmallIntegerField(blank=True, null=True)),
                ('from_scale', models.CharField(blank=True, max_length=50)),
                ('to_scale', models.CharField(blank=True, max_length=50)),
                ('from_basic_salary', models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True)),
                ('to_basic_salary', models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True)),
                ('promotion_date', models.DateField(db_index=True)),
                ('promotion_type', models.CharField(choices=[('regular', 'Regular'), ('fast_track', 'Fast track'), ('acting', 'Acting'), ('special', 'Special')], default='regular', max_length=20)),
                ('order_number', models.CharField(blank=True, max_length=100)),
                ('order_date', models.DateField(blank=True, null=True)),
                ('reason', models.TextField(blank=True)),
                ('remarks', models.TextField(blank=True)),
                ('created_by_id', models.IntegerField(blank=True, null=True)),
                ('correlation_id', models.CharField(blank=True, max_length=64)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('from_designation', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='+', to='personnel_guard.designation')),
                ('officer', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='promotions', to='personnel_guard.officer')),
                ('to_designation', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='+', to='personnel_guard.designation')),
            ],
            options={
                'ordering': ['-promotion_date', '-created_at'],
            },
        ),
        migrations.CreateModel(
            name='ActivityLogEntry',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('actor_id', models.IntegerField(blank=True, null=True)),
                ('actor_username', models.CharField(blank=True, max_length=150)),
                ('action', models.CharField(db_index=True, max_length=64)),
                ('target_type', models.CharField(max_length=64)),
                ('target_id', models.CharField(max_length=64)),
                ('description', models.TextField(blank=True)),
                ('details', models.JSONField(blank=True, default=dict)),
                ('correlation_id', models.CharField(blank=True, max_length=64)),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True)),
            ],
            options={
                'ordering': ['-created_at'],
                'indexes': [models.Index(fields=['target_type', 'target_id'], name='personnel_g_target__4c2a7d_idx')],
            },
        ),
        migrations.CreateModel(
            name='FieldAccessPolicy',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('role', models.CharField(max_length=32)),
                ('field_name', models.CharField(max_length=64)),
                ('can_view', models.BooleanField(default=True)),
                ('can_unmask', models.BooleanField(default=False)),
                ('requires_mfa', models.BooleanField(default=True)),
                ('requires_approval', models.BooleanField(default=False)),
                ('max_requests_per_day', models.PositiveIntegerField(default=5)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name': 'Field Access Policy',
                'verbose_name_plural': 'Field Access Policies',
                'constraints': [models.UniqueConstraint(fields=('role', 'field_name'), name='unique_field_policy_per_role')],
            },
        ),
        migrations.CreateModel(
            name='UnmaskRequest',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('request_id', models.CharField(default=personnel_guard.db.models.new_object_id, max_length=64, unique=True)),
                ('user_id', models.IntegerField(blank=True, null=True)),
                ('user_role', models.CharField(max_length=32)),
                ('field_name', models.CharField(max_length=64)),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('approved', 'Approved'), ('rejected', 'Rejected'), ('expired', 'Expired')], default='pending', max_length=16)),
                ('mfa_code', models.CharField(blank=True, max_length=16)),
                ('mfa_code_expires_at', models.DateTimeField(blank=True, null=True)),
                ('requires_mfa', models.BooleanField(default=True)),
                ('requires_approval', models.BooleanField(default=False)),
                ('mfa_verified', models.BooleanField(default=False)),
                ('access_reason', models.TextField(blank=True)),
                ('decided_by_id', models.IntegerField(blank=True, null=True)),
                ('decided_at', models.DateTimeField(blank=True, null=True)),
                ('decision_reason', models.TextField(blank=True)),
                ('disclosed_at', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
                ('officer', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='unmask_requests', to='personnel_guard.officer')),
            ],
            options={
                'ordering': ['-created_at'],
                'indexes': [models.Index(fields=['user_id', 'field_name', 'created_at'], name='personnel_g_user_id_7e5b21_idx')],
            },
        ),
        migrations.CreateModel(
            name='AuditReadRecord',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('user_id', models.IntegerField(blank=True, null=True)),
                ('user_role', models.CharField(blank=True, max_length=32)),
                ('user_name', models.CharField(blank=True, max_length=150)),
                ('officer_id', models.CharField(db_index=True, max_length=64)),
                ('officer_name', models.CharField(blank=True, max_length=200)),
                ('field_name', models.CharField(max_length=64)),
                ('field_value_masked', models.CharField(blank=True, max_length=255, null=True)),
                ('access_type', models.CharField(choices=[('view', 'View (masked)'), ('view_full', 'View (full)'), ('unmask', 'Unmask')], max_length=16)),
                ('access_reason', models.TextField(blank=True)),
                ('ip_address', models.GenericIPAddressField(blank=True, null=True)),
                ('user_agent', models.TextField(blank=True)),
                ('request_id', models.CharField(blank=True, max_length=64)),
                ('mfa_verified', models.BooleanField(default=False)),
                ('created_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
            ],
            options={
                'verbose_name': 'Audit Read Record',
                'verbose_name_plural': 'Audit Read Records',
                'ordering': ['-created_at'],
                'indexes': [models.Index(fields=['user_id', 'created_at'], name='personnel_g_user_id_3d90c4_idx')],
            },
        ),
    ]
